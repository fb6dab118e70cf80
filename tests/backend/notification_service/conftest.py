from types import SimpleNamespace

import pytest

from backend.notification_service.providers.registry import Providers


class FakeProvider:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.sent = []

    def send(self, payload):
        self.sent.append(payload)
        if self.error is not None:
            raise self.error
        return self.result


class FakeChannel:
    def __init__(self) -> None:
        self.acks = []
        self.nacks = []

    def basic_ack(self, delivery_tag):
        self.acks.append(delivery_tag)

    def basic_nack(self, delivery_tag, multiple=False, requeue=True):
        self.nacks.append((delivery_tag, requeue))


@pytest.fixture
def fake_providers() -> Providers:
    return Providers(
        email=FakeProvider(result={'id': 'email-1'}),
        sms=FakeProvider(result={'sid': 'SM1'}),
        push=FakeProvider(result='projects/school/messages/1'),
    )


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def delivery():
    def _delivery(tag: int = 1):
        return SimpleNamespace(delivery_tag=tag)

    return _delivery


@pytest.fixture
def fake_provider():
    return FakeProvider
