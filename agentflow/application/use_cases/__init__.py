"""Use cases: trigger dispatch, workflow execution and budget maintenance."""
