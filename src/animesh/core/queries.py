"""GraphQL documents sent to AniList.

Each command sends exactly one of these.  Page sizes are bound through
the ``$perPage`` variable so the service can clamp them.
"""

from __future__ import annotations

_TITLE = "title { romaji english native }"

AIRING_SCHEDULE_QUERY = f"""
query ($start: Int, $end: Int, $perPage: Int) {{
  Page(perPage: $perPage) {{
    airingSchedules(
      airingAt_greater: $start,
      airingAt_lesser: $end,
      sort: TIME
    ) {{
      airingAt
      episode
      media {{ {_TITLE} }}
    }}
  }}
}}
"""

NEXT_AIRING_QUERY = f"""
query ($now: Int) {{
  Page(perPage: 1) {{
    airingSchedules(airingAt_greater: $now, sort: TIME) {{
      airingAt
      episode
      media {{ {_TITLE} }}
    }}
  }}
}}
"""

_MEDIA_FIELDS = f"""
      id
      {_TITLE}
      type
      format
      status
      episodes
      chapters
      volumes
      averageScore
      popularity
      genres
      startDate {{ year month day }}
"""

SEARCH_QUERY = f"""
query ($search: String, $type: MediaType, $year: Int, $season: MediaSeason, $perPage: Int) {{
  Page(perPage: $perPage) {{
    media(search: $search, type: $type, seasonYear: $year, season: $season) {{
{_MEDIA_FIELDS}
    }}
  }}
}}
"""

TOP_QUERY = f"""
query ($type: MediaType, $genre: String, $perPage: Int) {{
  Page(perPage: $perPage) {{
    media(type: $type, genre: $genre, sort: SCORE_DESC) {{
{_MEDIA_FIELDS}
    }}
  }}
}}
"""

INFO_QUERY = f"""
query ($id: Int, $type: MediaType) {{
  Media(id: $id, type: $type) {{
{_MEDIA_FIELDS}
    description
    duration
    endDate {{ year month day }}
    nextAiringEpisode {{ episode airingAt }}
    characters(sort: ROLE, perPage: 5) {{
      edges {{ role node {{ name {{ full }} }} }}
    }}
    staff(perPage: 5) {{
      edges {{ role node {{ name {{ full }} }} }}
    }}
  }}
}}
"""
