"""
Audit pipeline services.

- reachability: URL normalization and HEAD probing
- page_discovery: homepage plus one money page per category
- page_driver: Playwright mobile page loads
- metrics: network events -> PageMetrics
- findings_engine: PageMetrics -> findings and fixes
- scoring: mean load time -> score and recommendation
- audit_service: orchestrates a run
"""
