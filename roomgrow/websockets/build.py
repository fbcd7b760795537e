"""Socket.IO dungeon build handlers.

Events:
    - build_dungeon: Build a dungeon incrementally; payload matches POST /api/dungeon/build
      plus optional ``ticks_per_frame``.

Emits:
    - build_progress: { tick, active_rooms, tiles } every ``ticks_per_frame`` growth ticks
    - build_complete: { seed, info, tiles } once doors are carved
    - error: { message, field, code } on invalid payloads
"""

from flask import current_app, request
from flask_socketio import emit

from roomgrow import socketio
from roomgrow.dungeon.tiles import surface_to_rows
from roomgrow.logging_utils import log
from roomgrow.routes.dungeon_api import BuildRequestError, build_payload, parse_build_request, start_build


@socketio.on("build_dungeon")
def handle_build_dungeon(data):
    try:
        parsed = parse_build_request(data or {}, current_app.config)
    except BuildRequestError as e:
        emit("error", {"message": f"Invalid build_dungeon: {e.message}", "field": e.field, "code": e.code})
        return
    builder = start_build(parsed, current_app.config)
    build_log = log.bind(sid=request.sid, seed=parsed["seed"])
    per_frame = parsed["ticks_per_frame"]
    build_log.info(event="build_dungeon", rooms=len(builder.rooms), ticks_per_frame=per_frame)
    while builder.advance():
        if builder.tick_count % per_frame == 0:
            emit(
                "build_progress",
                {
                    "tick": builder.tick_count,
                    "active_rooms": builder.active_room_count(),
                    "tiles": surface_to_rows(builder.surface, builder.floor_color, builder.void_color),
                },
            )
            # yield to the async worker so frames flush between ticks
            socketio.sleep(0)
    payload = build_payload(builder)
    emit("build_complete", payload)
    build_log.info(event="build_complete", doors=len(payload["info"]["doors"]))
