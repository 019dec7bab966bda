"""Test suite for streampdf."""
