# Routes package init
"""
PackTrack Backend — API Routes Package
========================================

Route Inventory:
    - packages.py:  GET/POST /api/packages, PUT/DELETE /api/packages/{trackingNumber}
    - site.py:      GET /  (client UI entry document)
    - health.py:    GET /health

Static assets (uploads, placeholder image, client scripts) are mounted at
"/" by main.create_app() after these routers, so API paths always win.
"""
