"""Repository modules (thin query helpers wrapping ``app_session``)."""
