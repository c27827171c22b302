POSTGRES_SERVICE = "postgres"
POSTGRES_CONTAINER = "postgresdb"
POSTGRES_USER = "postgres"
POSTGRES_PASSWORD = "postgres"
POSTGRES_DB = "openwebui"

OLLAMA_SERVICE = "ollama"
OLLAMA_PORT = 11434

WEBUI_SERVICE = "open-webui"
WEBUI_PORT = 8080

NGINX_SERVICE = "nginx"
HTTP_PORT = 80
HTTPS_PORT = 443

FRONTEND_NETWORK = "frontend"
BACKEND_NETWORK = "backend"

# Written instead of the OpenAI API key when the operator leaves it blank
API_KEY_PLACEHOLDER = "PUT_YOUR_KEY_HERE"
# Terminates the list of server names
IDENTITIES_DONE_TOKEN = "done"

COMPOSE_FILE_NAME = "docker-compose.yml"
NGINX_SITE_FILE_NAME = "default"
NGINX_SSL_OPTIONS_FILE_NAME = "options-ssl-nginx.conf"
DHPARAM_FILE_NAME = "dhparam.pem"
CERTIFICATE_FILE_NAME = "fullchain.pem"
CERTIFICATE_KEY_FILE_NAME = "private.key"

# Paths inside the nginx container
NGINX_CONTAINER_SITE_PATH = "/etc/nginx/conf.d/default.conf"
NGINX_CONTAINER_SSL_OPTIONS_PATH = "/etc/nginx/options-ssl-nginx.conf"
NGINX_CONTAINER_SSL_DIR = "/etc/ssl"

COMPOSE_SERVICE_LABEL = "com.docker.compose.service"
