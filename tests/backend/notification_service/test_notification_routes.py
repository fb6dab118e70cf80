from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from backend.core.errors import ConfigurationError, ValidationError
from backend.notification_service.main import app
from backend.notification_service.routes.notification_routes import (
    SendEmailRequest,
    SendPushRequest,
    SendSmsRequest,
    get_providers,
    send_email,
    send_push,
    send_sms,
)


def test_send_email_returns_provider_id(fake_providers) -> None:
    response = send_email(
        SendEmailRequest(to='ada@school.edu', subject='Welcome', text='Hello'),
        providers=fake_providers,
    )

    assert response == {'message': 'Email sent successfully via HTTP', 'emailId': 'email-1'}
    assert fake_providers.email.sent[0].subject == 'Welcome'


def test_send_email_requires_body(fake_providers) -> None:
    with pytest.raises(ValidationError) as exception_info:
        send_email(SendEmailRequest(to='ada@school.edu', subject='Welcome'), providers=fake_providers)

    assert exception_info.value.status_code == 400
    assert exception_info.value.message == (
        'Missing required fields for email: to, subject, and either html or text'
    )
    assert fake_providers.email.sent == []


def test_send_sms_returns_sid(fake_providers) -> None:
    response = send_sms(SendSmsRequest(to='+15552223333', body='Class cancelled'), providers=fake_providers)

    assert response == {'message': 'SMS sent successfully via HTTP', 'sid': 'SM1'}


def test_send_sms_requires_recipient(fake_providers) -> None:
    with pytest.raises(ValidationError) as exception_info:
        send_sms(SendSmsRequest(body='Class cancelled'), providers=fake_providers)

    assert exception_info.value.message == 'Missing required fields for SMS: to (phone number), body'


def test_send_push_accepts_camel_case_device_token(fake_providers) -> None:
    request = SendPushRequest.model_validate({'deviceToken': 'device-1', 'title': 'Grades', 'body': 'Posted'})

    response = send_push(request, providers=fake_providers)

    assert response == {
        'message': 'Push notification sent successfully via HTTP',
        'response': 'projects/school/messages/1',
    }
    assert fake_providers.push.sent[0].device_token == 'device-1'


def test_send_push_requires_device_token(fake_providers) -> None:
    with pytest.raises(ValidationError) as exception_info:
        send_push(SendPushRequest(title='Grades', body='Posted'), providers=fake_providers)

    assert exception_info.value.message == (
        'Missing required fields for Push Notification: deviceToken, title, body'
    )


def test_send_surfaces_configuration_errors(fake_providers, fake_provider) -> None:
    fake_providers.sms = fake_provider(error=ConfigurationError('Twilio service not fully configured.'))

    with pytest.raises(ConfigurationError) as exception_info:
        send_sms(SendSmsRequest(to='+15552223333', body='Class cancelled'), providers=fake_providers)

    assert exception_info.value.status_code == 500


def test_get_providers_reads_application_state(fake_providers) -> None:
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(providers=fake_providers)))

    assert get_providers(request) is fake_providers


def test_health() -> None:
    response = TestClient(app).get('/health')

    assert response.status_code == 200
    assert response.json() == {'status': 'Notification Service is Up and Running!'}
