"""Configuration constants for the ALDI store locator extractor

ALDI directory pages (e.g. https://store.aldi.com.au/nsw) list one
link per suburb or store:
- <span class="Hero-title"> holds the page heading
- <span class="Hero-geo"> holds the region being listed
- <a class="Directory-listLink" href="/nsw/sydney/123-main-street" data-count="(3)">
  wraps each entry, with the visible name in <span class="Directory-listLinkText">
"""

# Label written to the "source" field of extracted data
SOURCE_LABEL = "ALDI Store Locator"

# Class-name tokens (matched by substring)
HERO_TITLE_CLASS = "Hero-title"
HERO_GEO_CLASS = "Hero-geo"
STORE_LINK_CLASS = "Directory-listLink"
STORE_NAME_CLASS = "Directory-listLinkText"

# Attribute holding the number of stores behind a link, e.g. "(3)"
COUNT_ATTRIBUTE = "data-count"
DEFAULT_COUNT = "(1)"
