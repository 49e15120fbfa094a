"""Manifest schema definitions."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


class Expectation(BaseModel):
    """Response assertions recovered after a call."""

    model_config = ConfigDict(frozen=True)

    status: Optional[int] = Field(None, ge=100, le=599, description="Expected HTTP status code")
    substring: Optional[str] = Field(None, description="Text the response body must contain")

    @property
    def is_empty(self) -> bool:
        return self.status is None and self.substring is None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.status is not None:
            result["status"] = self.status
        if self.substring is not None:
            result["text"] = self.substring
        return result


class EndpointDescriptor(BaseModel):
    """One HTTP call recovered from a spec file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Display label (test title or method + url)")
    method: HttpMethod = Field(description="HTTP method")
    url: str = Field(min_length=1, description="URL or path exactly as written in the spec file")
    headers: Optional[Dict[str, str]] = Field(None, description="Recovered request headers")
    body: Optional[str] = Field(None, description="Request payload, whitespace-collapsed")
    auth: Optional[Literal["bearer"]] = Field(None, description="Authorization scheme marker")
    expectation: Expectation = Field(default_factory=Expectation, description="Response assertions")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the manifest's JSON shape.

        Key order is fixed so repeated runs serialize identically.
        """
        result: Dict[str, Any] = {
            "name": self.name,
            "method": self.method,
            "url": self.url,
        }
        if self.headers:
            result["headers"] = dict(self.headers)
        if self.auth:
            result["auth"] = self.auth
        if not self.expectation.is_empty:
            result["expect"] = self.expectation.to_dict()
        if self.body:
            result["body"] = self.body
        return result


class EndpointBuilder:
    """Collects extracted fields and produces an EndpointDescriptor.

    Only fields that were actually recovered are set; everything else stays
    absent on the built descriptor.
    """

    def __init__(self, method: str, url: str):
        self.method = method.upper()
        self.url = url
        self.name: Optional[str] = None
        self.headers: Dict[str, str] = {}
        self.body: Optional[str] = None
        self.auth: Optional[str] = None
        self.status: Optional[int] = None
        self.substring: Optional[str] = None

    def set_name(self, name: str) -> "EndpointBuilder":
        self.name = name
        return self

    def set_header(self, key: str, value: str) -> "EndpointBuilder":
        self.headers[key] = value
        return self

    def set_body(self, body: str) -> "EndpointBuilder":
        self.body = body
        return self

    def set_auth(self, auth: str) -> "EndpointBuilder":
        self.auth = auth
        return self

    def set_expectation(
        self,
        status: Optional[int] = None,
        substring: Optional[str] = None,
    ) -> "EndpointBuilder":
        if status is not None:
            self.status = status
        if substring is not None:
            self.substring = substring
        return self

    def build(self) -> EndpointDescriptor:
        """Build the immutable descriptor.

        Raises:
            pydantic.ValidationError: If a required field is missing or invalid
        """
        return EndpointDescriptor(
            name=self.name or f"{self.method} {self.url}",
            method=self.method,
            url=self.url,
            headers=dict(self.headers) if self.headers else None,
            body=self.body,
            auth=self.auth,
            expectation=Expectation(status=self.status, substring=self.substring),
        )
