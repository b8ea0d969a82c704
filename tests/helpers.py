from ipm_panel.errors import ApiError


class FakeApi:
    """Stands in for ApiClient: canned answers keyed by (method, url), every call recorded."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def _answer(self, method, url, payload=None):
        self.calls.append((method, url, payload))
        answer = self.responses.get((method, url), {})
        if callable(answer):
            answer = answer(payload)
        if isinstance(answer, ApiError):
            raise answer
        return answer

    def get(self, url):
        return self._answer("GET", url)

    def post_json(self, url, payload):
        return self._answer("POST", url, payload)

    def patch_json(self, url, payload):
        return self._answer("PATCH", url, payload)

    def delete(self, url, payload=None):
        return self._answer("DELETE", url, payload)

    def methods(self):
        return [m for m, _, _ in self.calls]
