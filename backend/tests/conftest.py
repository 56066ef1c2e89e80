"""
Pytest fixtures shared by unit and integration tests
"""
import pytest

from npdi.domain.models import FormConfiguration
from npdi.engine.submission_validator import SubmissionValidator
from npdi.engine.template_resolver import TemplateResolver
from npdi.repositories.form_config_repo import FormConfigurationRepository
from npdi.repositories.template_repo import TemplateRepository
from npdi.repositories.ticket_repo import TicketRepository
from npdi.repositories.user_repo import UserRepository
from npdi.services.template_registry import TemplateRegistry
from npdi.utils.cache import TTLCache

from .factories import LEGACY_PREFIXES, build_form_configuration
from .fakes import FakeCollection, FakeRegistry


@pytest.fixture
def form_configuration() -> FormConfiguration:
    return build_form_configuration()


@pytest.fixture
def fake_registry(form_configuration) -> FakeRegistry:
    registry = FakeRegistry()
    registry.add_form_configuration(form_configuration)
    return registry


@pytest.fixture
def resolver(fake_registry) -> TemplateResolver:
    return TemplateResolver(fake_registry)


@pytest.fixture
def validator(resolver) -> SubmissionValidator:
    return SubmissionValidator(
        resolver,
        fallback_prefixes=LEGACY_PREFIXES,
        enforce_hidden_requirements=False
    )


# =============================================================================
# In-memory MongoDB collections
# =============================================================================

@pytest.fixture
def template_collection() -> FakeCollection:
    return FakeCollection(unique=["template_id", "name"], unique_when=[("is_default", True)])


@pytest.fixture
def form_config_collection() -> FakeCollection:
    return FakeCollection(unique=["form_config_id"])


@pytest.fixture
def user_collection() -> FakeCollection:
    return FakeCollection(unique=["email"])


@pytest.fixture
def ticket_collection() -> FakeCollection:
    return FakeCollection(unique=["ticket_id"])


@pytest.fixture
def template_repo(template_collection) -> TemplateRepository:
    return TemplateRepository(collection=template_collection)


@pytest.fixture
def form_config_repo(form_config_collection) -> FormConfigurationRepository:
    return FormConfigurationRepository(collection=form_config_collection)


@pytest.fixture
def user_repo(user_collection) -> UserRepository:
    return UserRepository(collection=user_collection)


@pytest.fixture
def ticket_repo(ticket_collection) -> TicketRepository:
    return TicketRepository(collection=ticket_collection)


@pytest.fixture
def cache() -> TTLCache:
    return TTLCache(ttl_seconds=300, max_entries=100)


@pytest.fixture
def registry(template_repo, form_config_repo, user_repo, cache) -> TemplateRegistry:
    return TemplateRegistry(
        template_repo=template_repo,
        form_config_repo=form_config_repo,
        user_repo=user_repo,
        cache=cache
    )
