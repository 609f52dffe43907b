class FixturesFetchError(Exception):
    """Base per i fallimenti della fonte autorevole che il chiamante può ritentare più tardi."""


class RateLimitError(FixturesFetchError):
    """Sollevata quando viene superato il rate limit (HTTP 429) dopo tutti i tentativi di retry."""


class TransientAPIError(FixturesFetchError):
    """Sollevata quando errori transitori (5xx / timeout / connessione) persistono oltre i tentativi massimi."""
