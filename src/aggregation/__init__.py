"""
Aggregation package.

Contiene:
- fixtures: filtro di ambito e conversione dei record della fonte autorevole
- pipeline: MatchAggregator e l'entry point get_matches
"""
