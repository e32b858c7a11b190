"""Cliente HTTP tipado para a API do barberdesk.

O token não fica em estado global: ele vive num ``ApiSession`` passado ao
cliente, emitido no login, enviado em toda requisição e invalidado no logout
ou quando a API responde 401.

Regras baratas (horário no passado, formato da agenda semanal, nota da
avaliação) são validadas antes do envio; a palavra final sobre conflitos é
sempre do servidor.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional

import httpx

from barberdesk.config import API_BASE_URL, HTTP_TIMEOUT_SECONDS
from barberdesk.core import availability
from barberdesk.core.errors import ERRORS_BY_CODE
from barberdesk.core.scheduling import check_not_in_past, to_local_naive
from barberdesk.models.appointment import AppointmentStatus
from barberdesk.models.rating import RatingCreate
from barberdesk.models.schedule import ScheduleUpdate


logger = logging.getLogger(__name__)


class AuthenticationRequired(Exception):
    """Sessão ausente, expirada ou recusada pela API (401)."""


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ApiSession:
    def __init__(self):
        self.token: Optional[str] = None
        self.user: Optional[dict] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def issue(self, token: str, user: dict) -> None:
        self.token = token
        self.user = user

    def invalidate(self) -> None:
        self.token = None
        self.user = None

    def headers(self) -> Dict[str, str]:
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


def _error_from(response: httpx.Response) -> Exception:
    try:
        body = response.json()
    except ValueError:
        return ApiError(response.status_code, response.text)

    detail = body.get("detail") if isinstance(body, dict) else body
    code = body.get("error") if isinstance(body, dict) else None
    error_cls = ERRORS_BY_CODE.get(code)
    if error_cls is not None:
        return error_cls(detail)
    return ApiError(response.status_code, detail)


def _hh_mm(value):
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value


class _Resource:
    def __init__(self, client: "ApiClient", path: str):
        self._client = client
        self._path = path

    def list(self, **params) -> List[dict]:
        params = {k: v for k, v in params.items() if v is not None}
        return self._client.request("GET", f"{self._path}/", params=params)

    def get(self, item_id: int) -> dict:
        return self._client.request("GET", f"{self._path}/{item_id}")

    def create(self, data: Mapping[str, Any]) -> dict:
        return self._client.request("POST", f"{self._path}/", json=dict(data))

    def update(self, item_id: int, data: Mapping[str, Any]) -> dict:
        return self._client.request("PUT", f"{self._path}/{item_id}", json=dict(data))

    def delete(self, item_id: int) -> None:
        self._client.request("DELETE", f"{self._path}/{item_id}")


class _Appointments(_Resource):
    def create(
        self,
        client_id: int,
        barber_id: int,
        service_id: int,
        day: date,
        at: time,
        confirm: bool = False,
    ) -> dict:
        # o servidor recebe data e hora locais; horários com fuso são convertidos antes
        starts_at = to_local_naive(datetime.combine(day, at))
        check_not_in_past(starts_at)
        payload = {
            "client_id": client_id,
            "barber_id": barber_id,
            "service_id": service_id,
            "date": starts_at.date().isoformat(),
            "time": starts_at.strftime("%H:%M"),
            "confirm": confirm,
        }
        return self._client.request("POST", f"{self._path}/", json=payload)

    def update_status(self, item_id: int, status: AppointmentStatus) -> dict:
        status = AppointmentStatus(status)
        return self._client.request(
            "PATCH", f"{self._path}/{item_id}/status", json={"status": status.value}
        )

    def can_rate(self, item_id: int) -> bool:
        return self._client.request("GET", f"{self._path}/{item_id}/can-rate")["can_rate"]


class _Schedules:
    def __init__(self, client: "ApiClient"):
        self._client = client

    def get(self, barber_id: int) -> dict:
        return self._client.request("GET", f"/schedules/{barber_id}")

    def update(self, barber_id: int, week: Mapping[str, Any]) -> dict:
        draft = ScheduleUpdate.model_validate(dict(week)).model_dump()
        availability.validate_week(draft)
        payload = {k: _hh_mm(v) for k, v in draft.items()}
        return self._client.request("PUT", f"/schedules/{barber_id}", json=payload)

    @staticmethod
    def apply_monday(week: Mapping[str, Any]) -> dict:
        # mesma regra do servidor, sem ida à rede
        draft = ScheduleUpdate.model_validate(dict(week)).model_dump()
        return availability.apply_monday_to_weekdays(draft)


class _Ratings:
    def __init__(self, client: "ApiClient"):
        self._client = client

    def list(self, barber_id: int) -> List[dict]:
        return self._client.request("GET", f"/barbers/{barber_id}/ratings")

    def create(
        self,
        barber_id: int,
        score: int,
        comment: Optional[str] = None,
        appointment_id: Optional[int] = None,
        client_id: Optional[int] = None,
    ) -> dict:
        payload = RatingCreate(
            score=score,
            comment=comment,
            appointment_id=appointment_id,
            client_id=client_id,
        )
        return self._client.request(
            "POST",
            f"/barbers/{barber_id}/ratings",
            json=payload.model_dump(exclude_none=True),
        )


class _Notifications:
    def __init__(self, client: "ApiClient"):
        self._client = client

    def recent(self, limit: int = 20) -> List[dict]:
        return self._client.request("GET", "/notifications/", params={"limit": limit})

    def mark_read(self, notification_id: int) -> dict:
        return self._client.request("PATCH", f"/notifications/{notification_id}/read")


class ApiClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        session: Optional[ApiSession] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.session = session or ApiSession()
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

        self.barbers = _Resource(self, "/barbers")
        self.clients = _Resource(self, "/clients")
        self.services = _Resource(self, "/services")
        self.users = _Resource(self, "/users")
        self.appointments = _Appointments(self, "/appointments")
        self.schedules = _Schedules(self)
        self.ratings = _Ratings(self)
        self.notifications = _Notifications(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        self.http.close()

    def request(self, method: str, url: str, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(self.session.headers())

        response = self.http.request(method, url, headers=headers, **kwargs)

        if response.status_code == 401:
            if self.session.is_authenticated:
                logger.info("Sessão expirada ou inválida, token descartado")
            self.session.invalidate()
            raise AuthenticationRequired(_error_from(response))

        if response.is_error:
            raise _error_from(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # =========================
    # AUTENTICAÇÃO
    # =========================

    def login(self, email: str, password: str) -> dict:
        data = self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.session.issue(data["access_token"], data["user"])
        return data["user"]

    def register(self, name: str, email: str, phone: str, password: str) -> dict:
        data = self.request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "phone": phone, "password": password},
        )
        self.session.issue(data["access_token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        self.session.invalidate()

    def me(self) -> dict:
        return self.request("GET", "/users/me")

    def update_profile(self, data: Mapping[str, Any]) -> dict:
        return self.request("PUT", "/users/me", json=dict(data))

    def dashboard_stats(self) -> dict:
        return self.request("GET", "/dashboard/stats")
