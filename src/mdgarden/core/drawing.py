"""Rendering of drawing notes (.excalidraw.md) into embeddable HTML"""

import json
import re

from mdgarden.core.models import Note
from mdgarden.core.regexes import FRONTMATTER_RE


SCENE_RE = re.compile(r'```(compressed-json|json)\n(.*?)```', re.DOTALL)

SUPPORT_SCRIPT = """\
<script src="https://cdn.jsdelivr.net/npm/react@17/umd/react.production.min.js"></script>
<script src="https://cdn.jsdelivr.net/npm/react-dom@17/umd/react-dom.production.min.js"></script>
<script src="https://cdn.jsdelivr.net/npm/lz-string@1.5.0/libs/lz-string.min.js"></script>
<script src="https://cdn.jsdelivr.net/npm/@excalidraw/excalidraw@0/dist/excalidraw.production.min.js"></script>
<script>
function renderExcalidraw(id) {
  const el = document.getElementById("excalidraw-scene-" + id);
  const raw = el.textContent.trim();
  const data = el.dataset.compressed === "true"
    ? JSON.parse(LZString.decompressFromBase64(raw.replace(/\\s/g, "")))
    : JSON.parse(raw);
  const target = document.getElementById("excalidraw-plugin-" + id);
  ExcalidrawLib.exportToSvg({elements: data.elements, appState: data.appState || {}, files: data.files || {}})
    .then((svg) => target.appendChild(svg));
}
</script>
"""


class DrawingCompiler:
    """Turns a drawing note's scene data into a container div plus a render call."""

    def compile(self, note: Note, include_support_script: bool = True, id_suffix: str = "",
                include_frontmatter: bool = True) -> str:
        text = note.text
        m = SCENE_RE.search(text)
        if not m:
            raise ValueError(f"No drawing data in {note.path}")
        compressed = m.group(1) == "compressed-json"
        scene = m.group(2).strip()
        if not compressed:
            scene = json.dumps(json.loads(scene))
        scene = scene.replace("</", "<\\/")

        element_id = id_suffix or "0"
        parts = []
        if include_frontmatter and (fm := FRONTMATTER_RE.match(text)):
            parts.append(fm.group(0) + "\n")
        if include_support_script:
            parts.append(SUPPORT_SCRIPT)
        parts.append(
            f'<div id="excalidraw-plugin-{element_id}" class="excalidraw-plugin"></div>\n'
            f'<script type="application/json" class="excalidraw-scene" id="excalidraw-scene-{element_id}" '
            f'data-compressed="{str(compressed).lower()}">{scene}</script>\n'
            f'<script>renderExcalidraw("{element_id}");</script>\n'
        )
        return "".join(parts)
