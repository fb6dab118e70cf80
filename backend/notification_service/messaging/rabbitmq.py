import logging
import threading
from typing import Callable

import pika
from pika.exceptions import AMQPError

logger = logging.getLogger(__name__)


class RabbitMQConsumer:
    """Long-lived subscription to a durable queue with manual acknowledgement.

    The connection is re-established after a fixed delay whenever it is lost
    or cannot be opened. There is no backoff growth and no attempt cap.
    """

    def __init__(
        self,
        url: str,
        queue: str,
        on_message: Callable,
        reconnect_delay: float = 5,
        connection_factory: Callable[[pika.URLParameters], pika.BlockingConnection] = pika.BlockingConnection,
    ) -> None:
        self.url = url
        self.queue = queue
        self.on_message = on_message
        self.reconnect_delay = reconnect_delay
        self._connection_factory = connection_factory
        self._connection = None
        self._channel = None
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.is_open

    def connect(self):
        self._connection = self._connection_factory(pika.URLParameters(self.url))
        self._channel = self._connection.channel()
        self._channel.queue_declare(queue=self.queue, durable=True)
        self._channel.basic_consume(queue=self.queue, on_message_callback=self.on_message, auto_ack=False)
        logger.info('Connected to RabbitMQ; consuming from queue %s', self.queue)
        return self._channel

    def run(self) -> None:
        while not self._stopping.is_set():
            try:
                channel = self.connect()
                logger.info('Waiting for messages in %s', self.queue)
                channel.start_consuming()
            except AMQPError as exc:
                logger.error('RabbitMQ connection error: %r', exc)
            except Exception:
                logger.exception('RabbitMQ consumer failed')
            finally:
                self._close_connection()

            if self._stopping.is_set():
                break
            logger.info('RabbitMQ connection closed. Reconnecting in %s seconds...', self.reconnect_delay)
            self._stopping.wait(self.reconnect_delay)

        logger.info('RabbitMQ consumer stopped')

    def start(self) -> threading.Thread:
        self._stopping.clear()
        self._thread = threading.Thread(target=self.run, name='notification-consumer', daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = 10) -> None:
        self._stopping.set()
        connection = self._connection
        if connection is not None and connection.is_open:
            try:
                connection.add_callback_threadsafe(self._stop_consuming)
            except AMQPError:
                logger.debug('Connection closed before the consumer could be stopped')
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _stop_consuming(self) -> None:
        if self._channel is not None and self._channel.is_open:
            self._channel.stop_consuming()

    def _close_connection(self) -> None:
        connection = self._connection
        self._connection = None
        self._channel = None
        if connection is not None and connection.is_open:
            try:
                connection.close()
            except AMQPError:
                logger.debug('RabbitMQ connection already closed')
