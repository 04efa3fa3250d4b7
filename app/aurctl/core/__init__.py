"""Core pipeline for aurctl.

Source discovery, dependency resolution, build orchestration and the
supporting configuration, path and cache layers.
"""
