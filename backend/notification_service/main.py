import uvicorn
from fastapi import FastAPI

from backend.core import config
from backend.core.error_handlers import register_error_handlers
from backend.core.logging_config import configure_logging
from backend.notification_service.consumers.notification_consumer import NotificationDispatcher
from backend.notification_service.messaging.rabbitmq import RabbitMQConsumer
from backend.notification_service.providers.registry import build_providers
from backend.notification_service.routes import notification_routes

app = FastAPI(title='Notification Service')

register_error_handlers(app)


@app.on_event('startup')
def start_consumer() -> None:
    providers = build_providers()
    dispatcher = NotificationDispatcher(providers)
    consumer = RabbitMQConsumer(
        config.RABBITMQ_URL,
        config.NOTIFICATION_QUEUE,
        on_message=dispatcher.handle_message,
        reconnect_delay=config.RABBITMQ_RECONNECT_DELAY_SECONDS,
    )
    consumer.start()

    app.state.providers = providers
    app.state.dispatcher = dispatcher
    app.state.consumer = consumer


@app.on_event('shutdown')
def stop_consumer() -> None:
    consumer = getattr(app.state, 'consumer', None)
    if consumer is not None:
        consumer.stop()


@app.get('/health')
def health():
    return {'status': 'Notification Service is Up and Running!'}


if config.NOTIFICATION_HTTP_ROUTES_ENABLED:
    app.include_router(notification_routes.router, prefix='/api/notifications')


def run() -> None:
    configure_logging()
    uvicorn.run(app, host='0.0.0.0', port=config.NOTIFICATION_SERVICE_PORT)


if __name__ == '__main__':
    run()
