from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from simplejsonconfig import ConfigEntity, configuration


class Mode(Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


@dataclass
class Credentials:
    username: str = "admin"
    password: Optional[str] = None


@configuration("server")
@dataclass
class ServerConfig(ConfigEntity):
    host: str = "localhost"
    port: int = 8080
    mode: Mode = Mode.DEVELOPMENT
    timeout: float = 2.5
    allowed_origins: List[str] = field(default_factory=lambda: ["http://localhost"])
    credentials: Credentials = field(default_factory=Credentials)
    limits: Dict[str, int] = field(default_factory=lambda: {"requests": 100})


@configuration("database.json")
class DatabaseConfig(ConfigEntity):
    url: str
    pool_size: int
    fee_rate: Decimal

    def __init__(self):
        self.url = "sqlite:///plugin.db"
        self.pool_size = 5
        self.fee_rate = Decimal("0.001")
