"""Assemble the Application Server downlink request."""

from __future__ import annotations

from downlinkctl import __version__
from downlinkctl.core.codec import encode_payload
from downlinkctl.core.model import DownlinkRequest, SubmissionContext, normalize_api_key

USER_AGENT = f"downlinkctl/{__version__}"


def downlink_url(server: str, app_name: str, end_device_name: str, insert_mode: str) -> str:
    base = server.strip().rstrip("/")
    return f"{base}/api/v3/as/applications/{app_name}/devices/{end_device_name}/down/{insert_mode}"


def build_request(context: SubmissionContext) -> DownlinkRequest:
    """Build the request for a validated submission.

    ``push`` appends to the device's downlink queue and ``replace`` swaps the
    queue for this entry; both are applied server-side.
    """
    settings = context.settings
    url = downlink_url(
        settings.server,
        settings.app_name,
        settings.end_device_name,
        context.insert_mode.value,
    )
    headers = {
        "Authorization": f"Bearer {normalize_api_key(settings.api_key)}",
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    body = {
        "downlinks": [
            {
                "frm_payload": encode_payload(context.payload_hex),
                "f_port": context.f_port,
                "confirmed": context.confirmed,
                "priority": context.priority.value,
            }
        ]
    }
    return DownlinkRequest(url=url, headers=headers, body=body)
