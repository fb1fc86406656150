"""Use-case layer helpers shared by screen workflows.

Modules here translate adapter failures into stable, user-presentable errors
without performing transport I/O themselves.
"""
