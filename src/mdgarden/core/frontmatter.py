"""Compiled front-matter block for published notes"""

import yaml

from mdgarden.config import Settings
from mdgarden.core.models import Note
from mdgarden.core.urls import note_url


HOME_KEY = "dg-home"
HOME_TAG = "gardenEntry"


class FrontmatterCompiler:
    """Builds the YAML header a published note carries on the site."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def compile(self, note: Note) -> str:
        fm = dict(note.frontmatter)
        fm[self.settings.publish_key] = True
        if fm.get(HOME_KEY):
            tags = fm.get("tags") or []
            tags = [tags] if isinstance(tags, str) else list(tags)
            if HOME_TAG not in tags:
                tags.append(HOME_TAG)
            fm["tags"] = tags
            fm["permalink"] = "/"
        else:
            fm["permalink"] = note_url(
                note, self.settings.path_rewrite_rules,
                self.settings.permalink_key, self.settings.slugify_enabled,
            )
        header = yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
        return f"---\n{header}---"
