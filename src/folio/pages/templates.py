"""
Default project page template.

Only ``folio init`` and the legacy pipeline write this template; the main
build requires ``templates/project.html`` to exist.
"""

from __future__ import annotations

import logging
from pathlib import Path

from folio.core.backup import write_text_atomic

logger = logging.getLogger(__name__)

PROJECT_TEMPLATE_NAME = "project.html"

DEFAULT_PROJECT_TEMPLATE = """\
<!DOCTYPE html>
<html lang="{{ language }}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ seo_title or title }} | {{ site_name }}</title>
  <meta name="description" content="{{ seo_description or description }}">
  <meta name="keywords" content="{{ keywords | join(', ') }}">
  <meta name="author" content="{{ author_name }}">
  {% if environment != 'production' %}<meta name="robots" content="noindex">{% endif %}
  <link rel="canonical" href="{{ canonical_url }}">

  <meta property="og:type" content="{{ og_type }}">
  <meta property="og:title" content="{{ og_title }}">
  <meta property="og:description" content="{{ og_description }}">
  <meta property="og:url" content="{{ canonical_url }}">
  <meta property="og:site_name" content="{{ site_name }}">
  <meta property="og:locale" content="{{ locale }}">
  {% if og_image %}<meta property="og:image" content="{{ og_image }}">{% endif %}

  <meta name="twitter:card" content="{{ twitter_card }}">
  <meta name="twitter:title" content="{{ twitter_title }}">
  <meta name="twitter:description" content="{{ twitter_description }}">
  {% if twitter_image %}<meta name="twitter:image" content="{{ twitter_image }}">{% endif %}
  {% if twitter_handle %}<meta name="twitter:creator" content="{{ twitter_handle }}">{% endif %}

  <script type="application/ld+json">{{ structured_data | tojson }}</script>
  <link rel="stylesheet" href="../../css/style.css">
</head>
<body>
  <header class="project-header">
    <a href="../../index.html" class="back-link">&larr; {{ site_name }}</a>
    <h1>{{ title }}</h1>
    <p class="project-description">{{ description }}</p>
    <ul class="project-meta">
      <li><time datetime="{{ date }}">{{ date | format_date }}</time></li>
      <li>{{ reading_time | reading_time }} read</li>
      <li>Complexity {{ complexity }}/10</li>
    </ul>
    {% if categories %}
    <ul class="project-categories">
      {% for category in categories %}<li class="tag">{{ category }}</li>{% endfor %}
    </ul>
    {% endif %}
  </header>

  {% if hero_image %}
  <figure class="project-hero">
    <img src="{{ hero_image }}" alt="{{ hero_alt }}" loading="lazy">
  </figure>
  {% endif %}

  {% if headings | length > 2 %}
  <nav class="project-toc" aria-label="Table of contents">
    <ul>
      {% for heading in headings %}
      <li class="toc-level-{{ heading.level }}"><a href="#{{ heading.slug }}">{{ heading.text | truncate_text(60) }}</a></li>
      {% endfor %}
    </ul>
  </nav>
  {% endif %}

  <main class="project-content">
    {{ content }}
  </main>

  <footer class="project-footer">
    {% if tech_stack %}<p class="project-tech">Built with {{ tech_stack | join(', ') }}</p>{% endif %}
    {% if tags %}<p class="project-tags">{{ tags | join(' · ') }}</p>{% endif %}
    {% if github_url %}<a href="{{ github_url }}" rel="noopener">Source on GitHub</a>{% endif %}
    {% if demo_url %}<a href="{{ demo_url }}" rel="noopener">Live demo</a>{% endif %}
    <p>&copy; {{ current_year }} {{ author_name }}</p>
  </footer>
</body>
</html>
"""


def bootstrap_template(path: Path, overwrite: bool = False) -> bool:
    """Write the default project template.

    Args:
        path: Destination, usually ``templates/project.html``
        overwrite: Replace an existing template

    Returns:
        True if the template was written, False if one already existed
    """
    path = Path(path)
    if path.exists() and not overwrite:
        logger.debug("Template already exists: %s", path)
        return False

    write_text_atomic(path, DEFAULT_PROJECT_TEMPLATE)
    logger.debug("Wrote default template to %s", path)
    return True
