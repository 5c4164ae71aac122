"""
Test configuration and fixtures for messaging tests.

Provides:
- An employer, two jobseekers and an admin
- An active job owned by the employer, with the first jobseeker applied
- Authenticated API clients per role
- Socket.IO doubles: captured emits and in-memory sessions

Usage:
    def test_example(employer_client, jobseeker):
        response = employer_client.get(f"/api/chat/messages/{jobseeker.id}/")
        assert response.status_code == 200
"""

from unittest.mock import AsyncMock, patch

import pytest
from rest_framework.test import APIClient

from apps.messaging import socket as gateway
from apps.messaging.tests.factories import (
    AdminFactory,
    ApplicationFactory,
    EmployerFactory,
    JobFactory,
    JobSeekerFactory,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def employer(db):
    return EmployerFactory(name="Erin Employer")


@pytest.fixture
def jobseeker(db):
    return JobSeekerFactory(name="Casey Candidate")


@pytest.fixture
def other_jobseeker(db):
    return JobSeekerFactory(name="Other Candidate")


@pytest.fixture
def admin_user(db):
    return AdminFactory(name="Ada Admin")


# =============================================================================
# Job Fixtures
# =============================================================================


@pytest.fixture
def job(employer):
    return JobFactory(employer=employer, title="Backend Engineer")


@pytest.fixture
def other_job(employer):
    return JobFactory(employer=employer, title="Data Engineer")


@pytest.fixture
def application(job, jobseeker):
    return ApplicationFactory(job=job, user=jobseeker)


# =============================================================================
# API Client Fixtures
# =============================================================================


def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def employer_client(employer):
    return _client_for(employer)


@pytest.fixture
def jobseeker_client(jobseeker):
    return _client_for(jobseeker)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


# =============================================================================
# Socket.IO Fixtures
# =============================================================================


@pytest.fixture
def registry():
    gateway.registry.clear()
    yield gateway.registry
    gateway.registry.clear()


@pytest.fixture
def emitted():
    """Patch sio.emit and return the mock; calls are (event, data, to=sid)."""
    with patch.object(gateway.sio, "emit", new=AsyncMock()) as emit:
        yield emit


@pytest.fixture
def sessions():
    store = {}

    async def save_session(sid, session, namespace=None):
        store[sid] = session

    async def get_session(sid, namespace=None):
        return store[sid]

    with patch.object(gateway.sio, "save_session", new=AsyncMock(side_effect=save_session)), \
            patch.object(gateway.sio, "get_session", new=AsyncMock(side_effect=get_session)):
        yield store


def events(emit_mock, name):
    """(data, sid) pairs for every emit of one event name."""
    return [
        (call.args[1], call.kwargs.get("to"))
        for call in emit_mock.await_args_list
        if call.args[0] == name
    ]
