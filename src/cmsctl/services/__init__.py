"""Service layer — validation and schema operations behind ServiceResult.

Every public service method returns a ServiceResult; nothing raises to
the caller for an expected failure.
"""
