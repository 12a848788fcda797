"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from userharness.config import Settings
from userharness.database import ConnectionProvider, get_provider
from userharness.services import AccountFixtures, StateProbe, VerificationSimulator

# Type alias for the connection provider dependency
ProviderDep = Annotated[ConnectionProvider, Depends(get_provider)]


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_probe(connections: ProviderDep) -> StateProbe:
    """Build a state probe over the request's connection provider."""
    return StateProbe(connections)


def get_simulator(connections: ProviderDep, config: SettingsDep) -> VerificationSimulator:
    """Build a verification simulator over the request's connection provider."""
    return VerificationSimulator(connections, config)


def get_manager(connections: ProviderDep, config: SettingsDep) -> AccountFixtures:
    """Build account fixtures over the request's connection provider."""
    return AccountFixtures(connections, config)


# Type aliases for common dependencies
ProbeDep = Annotated[StateProbe, Depends(get_probe)]
SimulatorDep = Annotated[VerificationSimulator, Depends(get_simulator)]
ManagerDep = Annotated[AccountFixtures, Depends(get_manager)]
