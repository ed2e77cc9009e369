import pytest


@pytest.fixture
def feed_input(monkeypatch):
    """Replace input() with a scripted list of answers; EOF once they run out."""
    prompts = []

    def _feed(*answers):
        it = iter(answers)

        def fake_input(prompt=''):
            prompts.append(prompt)
            try:
                return next(it)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr('builtins.input', fake_input)
        return prompts

    return _feed
