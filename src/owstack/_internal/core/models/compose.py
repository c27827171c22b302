from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator
from typing_extensions import Annotated

from owstack._internal.core.models.common import CoreModel


class DependencyCondition(str, Enum):
    STARTED = "service_started"
    HEALTHY = "service_healthy"


class RestartPolicy(str, Enum):
    NO = "no"
    ALWAYS = "always"
    UNLESS_STOPPED = "unless-stopped"


class HealthCheck(CoreModel):
    test: List[str]
    interval: str = "10s"
    timeout: str = "5s"
    retries: int = 5


class DeviceReservation(CoreModel):
    driver: str = "nvidia"
    count: str = "all"
    capabilities: List[str] = ["gpu"]

    def to_deploy(self) -> Dict[str, Any]:
        return {"resources": {"reservations": {"devices": [self.model_dump()]}}}


class Network(CoreModel):
    driver: str = "bridge"


class ComposeService(CoreModel):
    image: Annotated[str, Field(description="The image reference")]
    container_name: Optional[str] = None
    restart: RestartPolicy = RestartPolicy.UNLESS_STOPPED
    tty: Optional[bool] = None
    environment: Dict[str, str] = {}
    volumes: Annotated[List[str], Field(description="Bind mounts as `host:container`")] = []
    ports: List[str] = []
    healthcheck: Optional[HealthCheck] = None
    depends_on: Dict[str, DependencyCondition] = {}
    extra_hosts: List[str] = []
    networks: List[str] = []

    def to_compose(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True)
        data["depends_on"] = {
            name: {"condition": condition} for name, condition in data["depends_on"].items()
        }
        return {key: value for key, value in data.items() if value != [] and value != {}}


class ServiceTopology(CoreModel):
    services: Dict[str, ComposeService]
    networks: Dict[str, Network] = {}

    @model_validator(mode="after")
    def _validate_dependencies(self) -> "ServiceTopology":
        for name, service in self.services.items():
            for dependency in service.depends_on:
                if dependency not in self.services:
                    raise ValueError(f"Service {name} depends on unknown service {dependency}")
            for network in service.networks:
                if network not in self.networks:
                    raise ValueError(f"Service {name} uses unknown network {network}")
        self.startup_order()
        return self

    def startup_order(self) -> List[str]:
        """
        Returns service names so that every service follows its dependencies.
        Raises `ValueError` if dependencies form a cycle.
        """
        order: List[str] = []
        visiting = set()

        def visit(name: str):
            if name in order:
                return
            if name in visiting:
                raise ValueError(f"Dependency cycle through service {name}")
            visiting.add(name)
            for dependency in self.services[name].depends_on:
                visit(dependency)
            visiting.discard(name)
            order.append(name)

        for name in self.services:
            visit(name)
        return order

    def to_compose(self) -> Dict[str, Any]:
        return {
            "services": {name: service.to_compose() for name, service in self.services.items()},
            "networks": {name: network.model_dump() for name, network in self.networks.items()},
        }
