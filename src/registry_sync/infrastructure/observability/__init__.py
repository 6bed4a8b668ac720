"""Domain-oriented observability infrastructure.

Domain probes encapsulate instrumentation details and provide a clean,
domain-focused API for observability.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from infrastructure.observability.startup_probe import (
    DefaultStartupProbe,
    StartupProbe,
)

__all__ = ["DefaultStartupProbe", "StartupProbe"]
