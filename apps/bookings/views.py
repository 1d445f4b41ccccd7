"""API views for the booking domain."""

from __future__ import annotations

import json
import logging
from uuid import UUID

from asgiref.sync import sync_to_async  # type: ignore
from django.conf import settings  # type: ignore
from django.core.handlers.asgi import ASGIRequest  # type: ignore
from django.http import StreamingHttpResponse  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, renderers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import NotFoundError
from shared.domain.principal import Principal

from .application.command_handlers import (
    CancelBookingCommand,
    CreateBookingCommand,
    UpdateBookingCommand,
)
from .bootstrap import get_services
from .filters import BookingFilterSet
from .realtime import format_sse
from .serializers import BookingCreateSerializer, BookingSerializer, BookingUpdateSerializer
from .services import get_visible_booking, visible_bookings

logger = logging.getLogger(__name__)


class EventStreamRenderer(renderers.BaseRenderer):
    """Lets clients negotiate text/event-stream; errors are sent as a single ``error`` event."""

    media_type = "text/event-stream"
    format = "event-stream"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):  # type: ignore
        if data is None:
            return b""
        return f"event: error\ndata: {json.dumps(data)}\n\n".encode(self.charset)


def _event_stream(hub, keepalive: float):
    # Subscribes on first read, so an unread stream holds nothing.
    subscription = hub.subscribe()
    try:
        yield ": connected\n\n"
        while True:
            message = subscription.get(timeout=keepalive)
            yield ": keepalive\n\n" if message is None else format_sse(message)
    finally:
        subscription.close()


async def _async_event_stream(hub, keepalive: float):
    # Under ASGI a synchronous iterator is consumed in full before anything is sent.
    subscription = hub.subscribe()
    get = sync_to_async(subscription.get, thread_sensitive=False)
    try:
        yield ": connected\n\n"
        while True:
            message = await get(keepalive)
            yield ": keepalive\n\n" if message is None else format_sse(message)
    finally:
        subscription.close()


def _booking_id(value) -> UUID:
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFoundError(
            "Booking not found",
            code="booking_not_found",
            details={"bookingId": str(value)},
        )


class BookingViewSet(viewsets.GenericViewSet):
    """
    Create, read, reschedule and cancel bookings.

    Mutations go through the booking command bus; reads use the
    queryset helpers in ``services``.
    """

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = BookingSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet
    lookup_value_regex = "[0-9a-fA-F-]+"

    def get_queryset(self):  # type: ignore
        return visible_bookings(Principal.from_user(self.request.user))

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action in {"update", "partial_update"}:
            return BookingUpdateSerializer
        return BookingSerializer

    def list(self, request, *args, **kwargs):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        data = BookingSerializer(queryset, many=True, context=self.get_serializer_context()).data
        return Response({"message": "Bookings retrieved successfully", "bookings": data})

    def retrieve(self, request, pk=None):  # type: ignore
        booking = get_visible_booking(Principal.from_user(request.user), _booking_id(pk))
        data = BookingSerializer(booking, context=self.get_serializer_context()).data
        return Response({"message": "Booking retrieved successfully", "booking": data})

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data
        booking = get_services().bus.handle_command(CreateBookingCommand(
            room_id=payload["roomId"],
            start_time=payload["startTime"],
            end_time=payload["endTime"],
            principal=Principal.from_user(request.user),
        ))
        return Response(
            {"message": "Booking created successfully", "booking": booking.to_dict()},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None, *args, **kwargs):  # type: ignore
        # PUT behaves like PATCH: every field is optional.
        serializer = BookingUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data
        booking = get_services().bus.handle_command(UpdateBookingCommand(
            booking_id=_booking_id(pk),
            principal=Principal.from_user(request.user),
            room_id=payload.get("roomId"),
            start_time=payload.get("startTime"),
            end_time=payload.get("endTime"),
        ))
        return Response({"message": "Booking updated successfully", "booking": booking.to_dict()})

    def partial_update(self, request, pk=None, *args, **kwargs):  # type: ignore
        return self.update(request, pk, *args, **kwargs)

    def destroy(self, request, pk=None, *args, **kwargs):  # type: ignore
        booking = get_services().bus.handle_command(CancelBookingCommand(
            booking_id=_booking_id(pk),
            principal=Principal.from_user(request.user),
        ))
        return Response({"message": "Booking cancelled successfully", "booking": booking.to_dict()})

    @action(
        detail=False,
        methods=["get"],
        renderer_classes=[renderers.JSONRenderer, EventStreamRenderer],
        filter_backends=[],
    )
    def events(self, request):  # type: ignore
        """Server-sent stream of bookingCreated, bookingUpdated and bookingCancelled events."""
        hub = get_services().hub
        keepalive = getattr(settings, "BOOKING_EVENTS_KEEPALIVE", 15)
        if isinstance(request._request, ASGIRequest):
            stream = _async_event_stream(hub, keepalive)
        else:
            stream = _event_stream(hub, keepalive)
        logger.info(f"User {request.user.pk} opened the booking event stream")
        response = StreamingHttpResponse(
            stream,
            content_type="text/event-stream",
        )
        response["Cache-Control"] = "no-cache"
        response["X-Accel-Buffering"] = "no"
        return response
