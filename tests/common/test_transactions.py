from contextlib import contextmanager

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.mess_system.mess_system.common.transactions import run_in_transaction
from src.mess_system.mess_system.core.exceptions import ConcurrencyError, InternalError
from src.mess_system.mess_system.database.connection import translate_error


class CountingTransaction:
    def __init__(self):
        self.opened = 0
        self.rolled_back = 0

    @contextmanager
    def __call__(self):
        self.opened += 1
        try:
            yield
        except Exception:
            self.rolled_back += 1
            raise


def test_retries_after_deadlock():
    tx = CountingTransaction()
    outcomes = [ConcurrencyError("deadlock"), "done"]

    def work():
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    assert run_in_transaction(tx, work, retry_delay=0) == "done"
    assert tx.opened == 2
    assert tx.rolled_back == 1


def test_gives_up_after_last_attempt():
    tx = CountingTransaction()

    def work():
        raise ConcurrencyError("deadlock")

    with pytest.raises(ConcurrencyError):
        run_in_transaction(tx, work, attempts=3, retry_delay=0)
    assert tx.opened == 3


def test_other_errors_are_not_retried():
    tx = CountingTransaction()

    def work():
        raise InternalError("disk")

    with pytest.raises(InternalError):
        run_in_transaction(tx, work, retry_delay=0)
    assert tx.opened == 1


def test_translate_error_marks_lock_conflicts_retryable():
    deadlock = mysql.connector.Error(msg="Deadlock found", errno=errorcode.ER_LOCK_DEADLOCK)
    timeout = mysql.connector.Error(msg="Lock wait timeout", errno=errorcode.ER_LOCK_WAIT_TIMEOUT)
    other = mysql.connector.Error(msg="Unknown column", errno=errorcode.ER_BAD_FIELD_ERROR)

    assert isinstance(translate_error(deadlock), ConcurrencyError)
    assert isinstance(translate_error(timeout), ConcurrencyError)
    assert not isinstance(translate_error(other), ConcurrencyError)
    assert isinstance(translate_error(other), InternalError)
