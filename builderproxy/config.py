"""
builderproxy configuration
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from builderproxy.policy.naming import NamingConvention


class Settings(BaseSettings):
    """Process-wide defaults; explicit arguments always take precedence."""

    model_config = SettingsConfigDict(
        env_prefix="BUILDERPROXY_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Factory
    DEFAULT_CONVENTION: NamingConvention = NamingConvention.GETTER_SETTER
    SINGLE_USE: bool = True  # reject writes and a second build once built

    # Benchmark
    BENCH_MULTIPLIERS: List[int] = [3, 5, 10, 20, 40, 80, 150]
    BENCH_SCALE: int = 1000  # objects per multiplier unit


settings = Settings()
