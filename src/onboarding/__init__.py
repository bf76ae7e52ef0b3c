from src.onboarding.provisioning import Provisioner, ProvisioningResult
from src.onboarding.service import OnboardingService, ReconfirmPolicy
from src.onboarding.state_machine import (
    InvalidTransitionError,
    OnboardingState,
    OnboardingStateMachine,
    OnboardingTrigger,
)

__all__ = [
    "OnboardingService",
    "ReconfirmPolicy",
    "Provisioner",
    "ProvisioningResult",
    "OnboardingStateMachine",
    "OnboardingState",
    "OnboardingTrigger",
    "InvalidTransitionError",
]
