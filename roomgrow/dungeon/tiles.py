# Tile characters for text renderings of a built surface
CLEAR = " "
VOID = "#"
FLOOR = "."
WALL = "W"
DOOR = "D"


def surface_to_rows(surface, floor_color, void_color, doors=None):
    """Render ``surface`` as row-major strings; door cells win over floor."""
    door_cells = set()
    for door in doors or ():
        door_cells.update(door.cells)
    rows = []
    for y in range(surface.height):
        chars = []
        for x in range(surface.width):
            px = surface.pixels[x][y]
            if (x, y) in door_cells:
                chars.append(DOOR)
            elif px.alpha == 0:
                chars.append(CLEAR)
            elif px == floor_color:
                chars.append(FLOOR)
            elif px == void_color:
                chars.append(VOID)
            else:
                chars.append(WALL)
        rows.append("".join(chars))
    return rows


__all__ = ["CLEAR", "VOID", "FLOOR", "WALL", "DOOR", "surface_to_rows"]
