# Services package init
"""
PackTrack Backend — Services Layer
====================================

Service Inventory:
    - RecordStore:    the JSON document holding every package record
    - ImageStore:     uploaded images in the public uploads directory
    - PackageService: CRUD rules on top of both stores

Routes receive a PackageService through packtrack.dependencies; nothing
below the routes knows about HTTP.
"""
