from unittest.mock import patch

from django.db import DatabaseError, OperationalError
from django.test import RequestFactory, SimpleTestCase, TestCase
from django_ratelimit.exceptions import Ratelimited

from .db_retry import retry_on_transient_error
from .middleware import RateLimitMiddleware


def flaky(failures, result='ok'):
    """Callable that raises OperationalError ``failures`` times, then returns ``result``"""
    calls = []

    def read():
        calls.append(1)
        if len(calls) <= failures:
            raise OperationalError('server closed the connection unexpectedly')
        return result

    return read, calls


@patch('transport_office.db_retry.time.sleep')
@patch('transport_office.db_retry.connection')
class RetryOnTransientErrorTests(SimpleTestCase):
    def test_recovers_after_transient_errors(self, connection, sleep):
        connection.in_atomic_block = False
        read, calls = flaky(2)

        self.assertEqual(retry_on_transient_error(read)(), 'ok')
        self.assertEqual(len(calls), 3)
        self.assertEqual(sleep.call_count, 2)
        self.assertEqual(connection.close_if_unusable_or_obsolete.call_count, 2)

    def test_gives_up_after_configured_attempts(self, connection, sleep):
        connection.in_atomic_block = False
        read, calls = flaky(5)

        with self.assertRaises(OperationalError):
            retry_on_transient_error(attempts=2, backoff=0)(read)()

        self.assertEqual(len(calls), 2)

    def test_never_retries_inside_a_transaction(self, connection, sleep):
        connection.in_atomic_block = True
        read, calls = flaky(1)

        with self.assertRaises(OperationalError):
            retry_on_transient_error(read)()

        self.assertEqual(len(calls), 1)
        sleep.assert_not_called()

    def test_other_errors_are_not_retried(self, connection, sleep):
        connection.in_atomic_block = False

        @retry_on_transient_error
        def broken():
            raise ValueError('bad input')

        with self.assertRaises(ValueError):
            broken()
        sleep.assert_not_called()


class RateLimitMiddlewareTests(SimpleTestCase):
    def test_ratelimited_becomes_429(self):
        request = RequestFactory().post('/api/auth/login/')

        response = RateLimitMiddleware(lambda r: None).process_exception(request, Ratelimited())

        self.assertEqual(response.status_code, 429)

    def test_other_exceptions_pass_through(self):
        request = RequestFactory().get('/api/orders/')

        self.assertIsNone(RateLimitMiddleware(lambda r: None).process_exception(request, ValueError()))


class HealthCheckTests(TestCase):
    def test_healthy(self):
        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'healthy')
        self.assertEqual(data['database'], 'connected')

    @patch('transport_office.health._memory_usage_mb', return_value=512.0)
    def test_memory_warning(self, memory):
        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['memory_warning'])

    @patch('transport_office.health.connection')
    def test_database_down(self, connection):
        connection.cursor.side_effect = DatabaseError('could not connect to server')

        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['database'], 'disconnected')

    def test_post_not_allowed(self):
        self.assertEqual(self.client.post('/health/').status_code, 405)
