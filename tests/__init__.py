"""Test suite for rigbind.

Test Structure:
- unit/: Unit tests grouped by area (controls, bindings, autopilot, config,
  scheduling, utils, cli) plus session wiring
- conftest.py: Shared fixtures (sample catalog, DMX universe, manual
  scheduler, recording notifier)
"""
