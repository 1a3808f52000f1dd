from marketplace.db.models.project import Project, Provider
from marketplace.db.models.bundle import Bundle
from marketplace.db.models.subscription import Subscription
from marketplace.db.models.rule_type import RuleType
from marketplace.db.models.profile import Profile

__all__ = ["Project", "Provider", "Bundle", "Subscription", "RuleType", "Profile"]
