"""FlowGuide Backend Application.

Turns automation workflow graphs into step-by-step build guides.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
