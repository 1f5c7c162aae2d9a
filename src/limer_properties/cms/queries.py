"""GROQ queries. References are dereferenced so records arrive fully materialized."""

from typing import Final

# Property types may carry either a slug or a plain ``value`` identifier.
_TYPE_PROJECTION: Final = '{_id, title, "slug": coalesce(slug.current, value)}'
_PLACE_PROJECTION: Final = '{_id, name, "slug": slug.current}'
_LOCATION_PROJECTION: Final = (
    '{_id, name, "slug": slug.current, '
    f"city->{_PLACE_PROJECTION}, state->{_PLACE_PROJECTION}}}"
)
_STRUCTURE_PROJECTION: Final = '{_id, title, "slug": slug.current}'

PROPERTY_PROJECTION: Final = f"""{{
  _id,
  _createdAt,
  title,
  "slug": slug.current,
  propertyType->{_TYPE_PROJECTION},
  status,
  location->{_LOCATION_PROJECTION},
  structure->{_STRUCTURE_PROJECTION},
  description,
  price,
  images[]{{asset, alt, caption}},
  bedrooms,
  bathrooms,
  area,
  floors,
  floorPosition,
  parking,
  yearBuilt,
  furnished,
  features,
  isFeatured,
  publishedAt
}}"""

PROPERTIES_QUERY: Final = f'*[_type == "property"] | order(publishedAt desc) {PROPERTY_PROJECTION}'

PROPERTY_QUERY: Final = (
    f'*[_type == "property" && (slug.current == $id || _id == $id)][0] {PROPERTY_PROJECTION}'
)

PROPERTY_TYPES_QUERY: Final = f'*[_type == "propertyType"] | order(title asc) {_TYPE_PROJECTION}'
LOCATIONS_QUERY: Final = f'*[_type == "location"] | order(name asc) {_LOCATION_PROJECTION}'
STRUCTURES_QUERY: Final = (
    f'*[_type == "propertyStructure"] | order(title asc) {_STRUCTURE_PROJECTION}'
)
STATUSES_QUERY: Final = f'*[_type == "propertyStatus"] | order(title asc) {_TYPE_PROJECTION}'

COMPANY_INFO_QUERY: Final = """*[_type == "companyInfo"][0] {
  _id,
  companyName,
  phone,
  email,
  address,
  description,
  socials
}"""
