"""CLI tools for the Dracin gateway.

- ``python -m src.cli serve`` -- run the gateway under uvicorn.
- ``python -m src.cli sources`` -- print the provider table and attempt order.
- ``python -m src.cli probe <route>`` -- resolve one route upstream and report
  which provider served it.

All commands use argparse; uvicorn is imported only by ``serve``.
"""
