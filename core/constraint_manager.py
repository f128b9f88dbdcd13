import logging
from typing import Callable, List

from core.state import ModelState

logger = logging.getLogger(__name__)

Rule = Callable[..., None]


class ConstraintManager:
    """
    Ordered registry of the rules that post constraints on a tournament model.

    A rule is a plain function `rule(model, state)`. Rules run in registration
    order, so pre-fixing rules registered first see an untouched model and
    later rules can skip the cells they fixed.
    """

    def __init__(self, model, state: ModelState):
        self.model = model
        self.state = state
        self.rules: List[Rule] = []

    def add_rule(self, rule_func: Rule, condition: bool = True):
        """Register a rule with optional enablement condition."""
        if condition:
            self.rules.append(rule_func)
        else:
            logger.debug(f"Skipping {rule_func.__name__}")

    def apply_all(self) -> int:
        """Apply all registered rules in order and return how many ran."""
        for rule in self.rules:
            logger.debug(f"Applying {rule.__name__}")
            rule(self.model, self.state)
        return len(self.rules)
