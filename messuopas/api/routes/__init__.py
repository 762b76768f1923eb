"""API routers."""

from messuopas.api.routes import catalog, content, events, invitations, organizations, sections

__all__ = ["catalog", "content", "events", "invitations", "organizations", "sections"]
