"""Notifier contract for out-of-band messages to account holders."""

from collections.abc import Mapping
from typing import Protocol


class Notifier(Protocol):
    async def send(
        self,
        recipient_email: str,
        subject: str,
        template_name: str,
        variables: Mapping[str, str],
    ) -> None:
        """Render ``template_name`` with ``variables`` and deliver it.

        Raises
        ------
        NotificationError
            If the message cannot be rendered or delivered
        """
        ...
