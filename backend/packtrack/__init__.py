"""
PackTrack Backend — Application Package Initializer
===================================================

What: Marks the `packtrack` directory as a Python package.
Who:  Imported by uvicorn (`packtrack.main:app`), pytest, and the `packtrack` console script.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   PackageService (Business Logic)   │  ← merge rules, defaults, uniqueness
    ├─────────────────────────────────────┤
    │        Schemas (API contract)       │  ← Pydantic, open attribute bag
    ├─────────────────────────────────────┤
    │   RecordStore / ImageStore (Disk)   │  ← one JSON document + upload dir
    └─────────────────────────────────────┘

    Routes translate exceptions into status codes; services raise them;
    stores own every file system call.
"""

__version__ = "1.0.0"
