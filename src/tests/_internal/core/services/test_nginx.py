from typing import List

from owstack._internal.core.models.configurator import (
    ServerIdentities,
    ServerIdentity,
    TopologyChoice,
)
from owstack._internal.core.services.nginx import (
    PrimaryRoute,
    RedirectRoute,
    build_proxy_descriptor,
    get_ssl_options,
)


def make_identities(*names: str) -> ServerIdentities:
    identities: List[ServerIdentity] = [ServerIdentity(name=name) for name in names]
    return ServerIdentities(primary=identities[0], secondary=identities[1:])


PLAIN_PRIMARY = """\
server {
    listen 80;
    server_name chat.example.com;

    location / {
        proxy_pass http://open-webui:8080;
        proxy_http_version 1.1;
        proxy_redirect off;
        proxy_set_header Connection "Upgrade";
        proxy_set_header Host $host;
        proxy_set_header Upgrade $http_upgrade;
        proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;
        proxy_set_header X-Forwarded-Host $host;
        proxy_set_header X-Forwarded-Port 80;
        proxy_set_header X-Forwarded-Proto $scheme;
        proxy_set_header X-Real-IP $remote_addr;
        chunked_transfer_encoding off;
        proxy_buffering off;
        proxy_connect_timeout 3600s;
        proxy_read_timeout 3600s;
        proxy_send_timeout 3600s;
        send_timeout 3600s;
        client_max_body_size 0;
    }
}
"""

TLS_REDIRECT = """\
server {
    listen 443 ssl;
    server_name api.example.com;

    ssl_certificate /etc/ssl/api.example.com/fullchain.pem;
    ssl_certificate_key /etc/ssl/api.example.com/private.key;
    include /etc/nginx/options-ssl-nginx.conf;
    ssl_dhparam /etc/ssl/dhparam.pem;

    return 301 https://chat.example.com$request_uri;
}

server {
    listen 80;
    server_name api.example.com;
    return 301 https://chat.example.com$request_uri;
}"""


class TestBuildProxyDescriptor:
    def test_single_plain_listener(self):
        descriptor = build_proxy_descriptor(
            make_identities("chat.example.com"), TopologyChoice(tls_enabled=False)
        )
        assert descriptor.redirects == []
        assert descriptor.render() == PLAIN_PRIMARY

    def test_tls_disabled_has_no_certificates(self):
        descriptor = build_proxy_descriptor(
            make_identities("chat.example.com", "api.example.com", "10.0.0.1"),
            TopologyChoice(tls_enabled=False),
        )
        conf = descriptor.render()
        assert "ssl" not in conf
        assert "listen 443" not in conf
        assert "Strict-Transport-Security" not in conf
        assert conf.count("listen 80;") == 3
        assert "return 301 http://chat.example.com$request_uri;" in conf

    def test_tls_enabled_one_encrypted_listener_per_identity(self):
        names = ["chat.example.com", "api.example.com", "10.0.0.1"]
        descriptor = build_proxy_descriptor(
            make_identities(*names), TopologyChoice(tls_enabled=True)
        )
        conf = descriptor.render()
        assert conf.count("listen 443 ssl;") == 3
        assert conf.count("listen 80;") == 3
        for name in names:
            assert conf.count(f"ssl_certificate /etc/ssl/{name}/fullchain.pem;") == 1
            assert conf.count(f"ssl_certificate_key /etc/ssl/{name}/private.key;") == 1

    def test_tls_primary_has_security_headers_and_https_redirect(self):
        descriptor = build_proxy_descriptor(
            make_identities("chat.example.com"), TopologyChoice(tls_enabled=True)
        )
        conf = descriptor.primary.render()
        assert "add_header Strict-Transport-Security 'max-age=31536000' always;" in conf
        assert "add_header X-Frame-Options 'deny' always;" in conf
        assert "add_header X-Content-Type-Options 'nosniff' always;" in conf
        assert "add_header X-XSS-Protection '1; mode=block' always;" in conf
        assert "proxy_set_header X-Forwarded-Port 443;" in conf
        assert "ssl_dhparam /etc/ssl/dhparam.pem;" in conf
        assert conf.endswith(
            "server {\n"
            "    listen 80;\n"
            "    server_name chat.example.com;\n"
            "    return 301 https://$host$request_uri;\n"
            "}"
        )

    def test_secondary_redirects_to_primary_over_tls(self):
        descriptor = build_proxy_descriptor(
            make_identities("chat.example.com", "api.example.com"),
            TopologyChoice(tls_enabled=True),
        )
        assert descriptor.redirects == [
            RedirectRoute(server_name="api.example.com", tls=True, redirect_to="chat.example.com")
        ]
        assert descriptor.redirects[0].render() == TLS_REDIRECT
        conf = descriptor.render()
        assert conf.count("listen 443 ssl;") == 2
        assert conf.count("listen 80;") == 2

    def test_routes_follow_collection_order(self):
        descriptor = build_proxy_descriptor(
            make_identities("c.example.com", "b.example.com", "a.example.com"),
            TopologyChoice(),
        )
        assert [r.server_name for r in descriptor.routes] == [
            "c.example.com",
            "b.example.com",
            "a.example.com",
        ]
        conf = descriptor.render()
        assert conf.index("server_name b.example.com;") < conf.index("server_name a.example.com;")

    def test_primary_proxies_to_webui_service(self):
        route = PrimaryRoute(server_name="chat.example.com")
        assert route.upstream == "http://open-webui:8080"
        assert route.certificate_path is None


class TestGetSslOptions:
    def test_protocols_and_session_settings(self):
        options = get_ssl_options()
        assert "ssl_protocols TLSv1.2 TLSv1.3;" in options
        assert "ssl_session_cache shared:le_nginx_SSL:10m;" in options
        assert "ssl_session_timeout 1440m;" in options
        assert options.startswith("ssl_session_cache")
