"""Application composition layer for the sacraments screen.

Controllers in this package compose view models, the refresh registry, and
record sources into screen workflows without rendering anything themselves.
"""
