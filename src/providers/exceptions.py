class ScraperError(Exception):
    """Sollevata quando una fonte di palinsesti non è raggiungibile o la pagina non è interpretabile."""
