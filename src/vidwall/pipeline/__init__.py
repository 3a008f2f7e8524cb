"""Pipeline orchestration layer.

Stages run in a fixed order, one module per stage:
- `pipeline/fetch.py` - sequential per-URL downloads with failure isolation
- `pipeline/scan.py` - per-item directory scan and flat fallback scan
- `pipeline/metadata.py` - sidecar parsing and title sanitization
- `pipeline/manifest.py` - manifest types, writer, reader
- `pipeline/build.py` - end-to-end run used by the CLI

Import policy:
- CLI imports only `pipeline.build` for orchestration and `pipeline.manifest`
  for reading.
- Stage modules must not import `pipeline.build`.
"""
