from unithelper.core import results


def test_attempt_success():
    """Capture the return value of a call."""
    outcome = results.attempt(int, '3')
    assert outcome == results.Success(3)
    assert outcome.ok
    assert outcome.value == 3


def test_attempt_failure():
    """Capture the error raised by a call."""
    outcome = results.attempt(int, 'three')
    assert isinstance(outcome, results.Failure)
    assert not outcome.ok
    assert outcome.kind == 'ValueError'
    assert 'three' in outcome.message
    assert outcome.known(ValueError)
    assert outcome.known(KeyError, Exception)
    assert not outcome.known(KeyError)


def test_attempt_keywords():
    """Pass positional and keyword arguments through."""
    outcome = results.attempt(int, '11', base=2)
    assert outcome.value == 3
