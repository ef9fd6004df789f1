"""Company onboarding identity service."""
