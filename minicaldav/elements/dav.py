#!/usr/bin/env python
from typing import ClassVar
from typing import Dict

from .base import BaseElement
from .base import ValuedBaseElement
from minicaldav.lib.namespace import ns
from minicaldav.lib.namespace import nsmap2


# Operations
class Propfind(BaseElement):
    tag: ClassVar[str] = ns("D", "propfind")


class Mkcol(BaseElement):
    tag: ClassVar[str] = ns("D", "mkcol")
    ## the MKCOL body carries apple and owncloud properties
    namespaces: ClassVar[Dict[str, str]] = nsmap2


# Components / Data
class Prop(BaseElement):
    tag: ClassVar[str] = ns("D", "prop")


class Collection(BaseElement):
    tag: ClassVar[str] = ns("D", "collection")


class Set(BaseElement):
    tag: ClassVar[str] = ns("D", "set")


class Self(BaseElement):
    tag: ClassVar[str] = ns("D", "self")


# Properties
class ResourceType(BaseElement):
    tag: ClassVar[str] = ns("D", "resourcetype")


class DisplayName(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "displayname")


class GetEtag(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "getetag")


class Href(BaseElement):
    tag: ClassVar[str] = ns("D", "href")


class Response(BaseElement):
    tag: ClassVar[str] = ns("D", "response")


class PropStat(BaseElement):
    tag: ClassVar[str] = ns("D", "propstat")


class MultiStatus(BaseElement):
    tag: ClassVar[str] = ns("D", "multistatus")


class CurrentUserPrincipal(BaseElement):
    tag: ClassVar[str] = ns("D", "current-user-principal")


class CurrentUserPrivilegeSet(BaseElement):
    tag: ClassVar[str] = ns("D", "current-user-privilege-set")
