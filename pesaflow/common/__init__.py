"""
Package marker for shared helpers under `pesaflow.common`.
Settings and logging live here so the view engine and scripts configure themselves the same way.
"""
