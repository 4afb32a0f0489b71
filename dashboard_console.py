#!/usr/bin/env python3
"""
Tkinter dashboard for the FlightDesk API.

Features:
    * Connect the wallet exposed by the configured provider via /session/connect.
    * Show the connected account, deposited balance and the flight list.
    * Book or cancel seats, create flights and deposit funds.
    * Surface notifications pushed by the API after each action.
"""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

try:
    import requests
    from requests import Response, Session
    from requests.exceptions import RequestException
except ImportError as exc:  # pragma: no cover - helper script
    raise SystemExit(
        "The 'requests' package is required. Install it with `pip install requests`."
    ) from exc

import tkinter as tk
from tkinter import messagebox, ttk
from tkinter.scrolledtext import ScrolledText


DEFAULT_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 180
FLIGHT_COLUMNS = (
    ("id", "Flight ID", 80),
    ("name", "Name", 220),
    ("seats", "Seats", 80),
    ("price", "Price (ETH)", 120),
    ("active", "Active", 80),
)


def parse_int(raw: str) -> Optional[int]:
    try:
        return int(raw.strip())
    except (AttributeError, ValueError):
        return None


@dataclass
class ConsoleState:
    base_url: str = DEFAULT_BASE_URL.rstrip("/")
    last_notification_id: int = 0


class FlightDeskConsole(tk.Tk):
    def __init__(self) -> None:
        super().__init__()
        self.title("Flight Management System")
        self.minsize(820, 680)

        self.state = ConsoleState()
        self.session: Session = requests.Session()

        self._build_ui()
        self.log(f"UI ready. Using API base URL: {self.state.base_url}")
        self._run_async(self._load_dashboard)

    # --- UI construction -------------------------------------------------

    def _build_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(2, weight=1)

        account_frame = ttk.LabelFrame(self, text="Wallet")
        account_frame.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        account_frame.columnconfigure(1, weight=1)

        ttk.Label(account_frame, text="Base URL").grid(row=0, column=0, padx=6, pady=6, sticky="w")
        self.base_url_var = tk.StringVar(value=self.state.base_url)
        ttk.Entry(account_frame, textvariable=self.base_url_var).grid(
            row=0, column=1, sticky="ew", padx=(0, 6), pady=6
        )
        ttk.Button(account_frame, text="Apply", command=self._update_base_url, width=10).grid(
            row=0, column=2, padx=6, pady=6
        )

        self.status_var = tk.StringVar(value="Checking wallet provider...")
        ttk.Label(account_frame, textvariable=self.status_var).grid(
            row=1, column=0, columnspan=2, padx=6, pady=6, sticky="w"
        )
        self.connect_button = ttk.Button(
            account_frame, text="Connect Wallet", command=self._on_connect, width=16
        )
        self.connect_button.grid(row=1, column=2, padx=6, pady=6)

        self.account_var = tk.StringVar(value="Your Account: -")
        self.balance_var = tk.StringVar(value="Your Balance: 0 ETH")
        ttk.Label(account_frame, textvariable=self.account_var).grid(
            row=2, column=0, columnspan=3, padx=6, pady=2, sticky="w"
        )
        ttk.Label(account_frame, textvariable=self.balance_var).grid(
            row=3, column=0, columnspan=3, padx=6, pady=(2, 6), sticky="w"
        )

        self._build_actions()

        flights_frame = ttk.LabelFrame(self, text="Flights")
        flights_frame.grid(row=2, column=0, sticky="nsew", padx=12, pady=6)
        flights_frame.columnconfigure(0, weight=1)
        flights_frame.rowconfigure(0, weight=1)

        self.flights_tree = ttk.Treeview(
            flights_frame,
            columns=[key for key, _, _ in FLIGHT_COLUMNS],
            show="headings",
            height=8,
        )
        for key, label, width in FLIGHT_COLUMNS:
            self.flights_tree.heading(key, text=label)
            self.flights_tree.column(key, width=width, anchor="w")
        self.flights_tree.grid(row=0, column=0, sticky="nsew", padx=6, pady=6)
        self.flights_tree.bind("<<TreeviewSelect>>", self._on_flight_selected)
        ttk.Button(flights_frame, text="Refresh", command=self._on_refresh, width=10).grid(
            row=1, column=0, padx=6, pady=(0, 6), sticky="e"
        )

        console_frame = ttk.LabelFrame(self, text="Log")
        console_frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=(6, 12))
        console_frame.columnconfigure(0, weight=1)
        self.output = ScrolledText(console_frame, wrap="word", height=8, state="disabled")
        self.output.grid(row=0, column=0, sticky="nsew", padx=6, pady=6)

    def _build_actions(self) -> None:
        notebook = ttk.Notebook(self)
        notebook.grid(row=1, column=0, sticky="ew", padx=12, pady=6)

        booking = ttk.Frame(notebook)
        booking.columnconfigure(1, weight=1)
        notebook.add(booking, text="Actions")
        ttk.Label(booking, text="Flight ID").grid(row=0, column=0, padx=8, pady=6, sticky="w")
        self.flight_id_var = tk.StringVar(value="1")
        ttk.Entry(booking, textvariable=self.flight_id_var).grid(
            row=0, column=1, sticky="ew", padx=(0, 8), pady=6
        )
        ttk.Label(booking, text="Seats to Book/Cancel").grid(
            row=1, column=0, padx=8, pady=6, sticky="w"
        )
        self.seats_var = tk.StringVar(value="1")
        ttk.Entry(booking, textvariable=self.seats_var).grid(
            row=1, column=1, sticky="ew", padx=(0, 8), pady=6
        )
        buttons = ttk.Frame(booking)
        buttons.grid(row=2, column=1, sticky="e", padx=8, pady=(6, 6))
        ttk.Button(buttons, text="Book Seats", command=self._on_book, width=16).pack(
            side="left", padx=(0, 6)
        )
        ttk.Button(buttons, text="Cancel Booking", command=self._on_cancel, width=16).pack(
            side="left"
        )

        create = ttk.Frame(notebook)
        create.columnconfigure(1, weight=1)
        notebook.add(create, text="Create Flight")
        self.new_name_var = tk.StringVar()
        self.new_seats_var = tk.StringVar(value="0")
        self.new_price_var = tk.StringVar()
        for row, (label, var) in enumerate(
            (
                ("Flight Name", self.new_name_var),
                ("Seats Available", self.new_seats_var),
                ("Price per Seat (ETH)", self.new_price_var),
            )
        ):
            ttk.Label(create, text=label).grid(row=row, column=0, padx=8, pady=6, sticky="w")
            ttk.Entry(create, textvariable=var).grid(
                row=row, column=1, sticky="ew", padx=(0, 8), pady=6
            )
        ttk.Button(create, text="Create Flight", command=self._on_create_flight, width=16).grid(
            row=3, column=1, padx=8, pady=(6, 6), sticky="e"
        )

        funds = ttk.Frame(notebook)
        funds.columnconfigure(1, weight=1)
        notebook.add(funds, text="Manage Funds")
        ttk.Label(funds, text="ETH to Deposit").grid(row=0, column=0, padx=8, pady=6, sticky="w")
        self.deposit_var = tk.StringVar(value="0")
        ttk.Entry(funds, textvariable=self.deposit_var).grid(
            row=0, column=1, sticky="ew", padx=(0, 8), pady=6
        )
        ttk.Button(funds, text="Deposit Funds", command=self._on_deposit, width=16).grid(
            row=1, column=1, padx=8, pady=(6, 6), sticky="e"
        )

    # --- Handlers --------------------------------------------------------

    def _update_base_url(self) -> None:
        value = self.base_url_var.get().strip().rstrip("/")
        if not value:
            messagebox.showerror("Validation", "Base URL cannot be empty.")
            return
        self.state.base_url = value
        self.log(f"Base URL set to {value}")
        self._run_async(self._load_dashboard)

    def _on_connect(self) -> None:
        self._run_async(lambda: self._dashboard_request("Connect wallet", "POST", "/session/connect"))

    def _on_refresh(self) -> None:
        self._run_async(lambda: self._dashboard_request("Refresh", "POST", "/dashboard/refresh"))

    def _on_flight_selected(self, _event: Any) -> None:
        selection = self.flights_tree.selection()
        if selection:
            self.flight_id_var.set(str(self.flights_tree.item(selection[0], "values")[0]))

    def _booking_inputs(self) -> Optional[tuple[int, int]]:
        flight_id = parse_int(self.flight_id_var.get())
        seats = parse_int(self.seats_var.get())
        if flight_id is None or seats is None:
            messagebox.showerror("Validation", "Flight ID and seats must be whole numbers.")
            return None
        return flight_id, seats

    def _on_book(self) -> None:
        inputs = self._booking_inputs()
        if inputs is None:
            return
        flight_id, seats = inputs
        self._run_async(
            lambda: self._action_request(
                "Book seats", f"/flights/{flight_id}/bookings", {"seats": seats}
            )
        )

    def _on_cancel(self) -> None:
        inputs = self._booking_inputs()
        if inputs is None:
            return
        flight_id, seats = inputs
        self._run_async(
            lambda: self._action_request(
                "Cancel booking", f"/flights/{flight_id}/cancellations", {"seats": seats}
            )
        )

    def _on_create_flight(self) -> None:
        seats = parse_int(self.new_seats_var.get())
        payload = {
            "name": self.new_name_var.get().strip(),
            "seats": seats,
            "price": self.new_price_var.get().strip(),
        }
        if not payload["name"] or seats is None or not payload["price"]:
            messagebox.showerror("Validation", "Name, seats and price are required.")
            return
        self._run_async(lambda: self._action_request("Create flight", "/flights/", payload))

    def _on_deposit(self) -> None:
        amount = self.deposit_var.get().strip()
        if not amount:
            messagebox.showerror("Validation", "Deposit amount is required.")
            return
        self._run_async(
            lambda: self._action_request("Deposit funds", "/funds/deposits", {"amount": amount})
        )

    # --- Requests --------------------------------------------------------

    def _load_dashboard(self) -> None:
        self._dashboard_request("Load dashboard", "GET", "/dashboard")

    def _dashboard_request(self, label: str, method: str, endpoint: str) -> None:
        resp = self._perform_request(label, method, endpoint)
        if resp is not None:
            self.after(0, lambda data=resp.json(): self._render_dashboard(data))

    def _action_request(self, label: str, endpoint: str, payload: dict[str, Any]) -> None:
        resp = self._perform_request(label, "POST", endpoint, json=payload)
        if resp is not None:
            data = resp.json()
            self.after(0, lambda dashboard=data.get("dashboard") or {}: self._render_dashboard(dashboard))
        else:
            # Failed actions still push a notification; pull it in.
            self._load_dashboard()

    def _run_async(self, callback: Any) -> None:
        thread = threading.Thread(target=callback, daemon=True)
        thread.start()

    def _perform_request(
        self,
        label: str,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> Optional[Response]:
        url = f"{self.state.base_url}{endpoint}"
        self.log(f"{label}: {method.upper()} {url}")
        try:
            response = self.session.request(
                method=method.upper(),
                url=url,
                timeout=REQUEST_TIMEOUT,
                **kwargs,
            )
        except RequestException as exc:
            self.log(f"{label} failed: {exc}")
            return None

        if response.status_code >= 400:
            self._log_error(label, response)
            return None
        return response

    # --- Rendering -------------------------------------------------------

    def _render_dashboard(self, data: dict[str, Any]) -> None:
        if not data:
            return
        session = data.get("session") or {}
        connected = bool(session.get("connected"))
        self.status_var.set(session.get("message") or "Wallet connected.")
        self.connect_button.configure(state="disabled" if connected else "normal")
        self.account_var.set(f"Your Account: {session.get('account') or '-'}")

        balance = data.get("balance") or {}
        self.balance_var.set(f"Your Balance: {balance.get('balance') or '0'} ETH")

        self.flights_tree.delete(*self.flights_tree.get_children())
        for flight in data.get("flights") or []:
            self.flights_tree.insert(
                "",
                "end",
                values=(
                    flight["id"],
                    flight["name"],
                    flight["seats_available"],
                    flight["price_per_seat"],
                    "Yes" if flight["is_active"] else "No",
                ),
            )

        sync = data.get("sync") or {}
        if sync.get("status") == "failed":
            self.log(f"Sync failed ({sync.get('error_kind')}): {sync.get('error_message')}")

        for notification in data.get("notifications") or []:
            if notification["id"] <= self.state.last_notification_id:
                continue
            self.state.last_notification_id = notification["id"]
            self.log(f"[{notification['level']}] {notification['message']}")
            if notification["level"] == "error":
                messagebox.showerror("FlightDesk", notification["message"])
            else:
                messagebox.showinfo("FlightDesk", notification["message"])

    # --- Logging helpers -------------------------------------------------

    def log(self, message: str) -> None:
        def _append() -> None:
            self.output.configure(state="normal")
            self.output.insert("end", f"{message}\n")
            self.output.configure(state="disabled")
            self.output.see("end")

        self.after(0, _append)

    def _log_error(self, label: str, response: Response) -> None:
        try:
            body = json.dumps(response.json(), indent=2)
        except ValueError:
            body = response.text.strip() or "<empty body>"
        self.log(f"{label} response ({response.status_code}):\n{body}\n")


def main() -> None:
    app = FlightDeskConsole()
    app.mainloop()


if __name__ == "__main__":
    main()
