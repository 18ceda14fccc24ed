"""Interview/Grid controller package."""

from mandalart.controller.controller import MandalartController
from mandalart.controller.states import AppStep, can_transition

__all__ = ["MandalartController", "AppStep", "can_transition"]
