"""Sales and product record-keeping with bulk CSV uploads.

The public surface lives in :mod:`monthly_recap.api`; the CLI in
:mod:`monthly_recap.cli`.
"""
