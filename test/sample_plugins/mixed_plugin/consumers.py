from typing import ClassVar

from simplejsonconfig import autowired
from sample_plugins.mixed_plugin.configs import DeepConfig, FragileConfig, GoodConfig


class Consumers:
    good: ClassVar[GoodConfig] = autowired()
    fragile: ClassVar[FragileConfig] = autowired()
    deep: ClassVar[DeepConfig] = autowired()
    untyped = autowired()
