"""
Service modules used by the summary report pipeline.

This package contains configuration, storage access, domain lookup, report
text generation, message building and error rendering.
"""

__all__ = ['config', 'domains', 'email', 'errors', 's3', 'summary_report']
