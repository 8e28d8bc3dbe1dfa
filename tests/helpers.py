"""Shared test helpers: raw log builders and a stub Ollama client."""

from types import SimpleNamespace

from digest.git_utils import COMMIT_SEPARATOR, FIELD_SEPARATOR


def make_log(*records):
    """Join field lists into a raw log blob the way git emits it."""
    return "".join(FIELD_SEPARATOR.join(fields) + COMMIT_SEPARATOR for fields in records)


class StubOllamaClient:
    """Ollama client stand-in that returns a canned reply and records requests."""

    def __init__(self, reply="{}", error=None, models=("llama3:latest",)):
        self.reply = reply
        self.error = error
        self.models = list(models)
        self.requests = []

    def chat(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"message": {"role": "assistant", "content": self.reply}}

    def list(self):
        if self.error is not None:
            raise self.error
        return SimpleNamespace(models=[SimpleNamespace(model=m) for m in self.models])
