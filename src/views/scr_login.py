from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label, TabbedContent, TabPane

from utils.errors import DuplicateEmail, InvalidCredentials, StorefrontError
from utils.messages import UserLoginMessage
from views.base_screen import BaseScreen


class LoginScreen(BaseScreen):
    """
    Login and sign-up tabs. Dismisses with True once a user is logged in,
    False if the customer goes back without logging in.
    """

    BINDINGS = [("escape", "back", "Back")]

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Login", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Email")
                    yield Input(placeholder="user@example.com", id="input-login-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    with Horizontal(id="div-login-btns"):
                        yield Button("Back", id="btn-back")
                        yield Button("Login", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    yield Label("Full Name *")
                    yield Input(placeholder="Jane Doe", id="input-reg-name")
                    yield Label("Email *")
                    yield Input(placeholder="user@example.com", id="input-reg-email")
                    yield Label("Password *")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-pwd"
                    )
                    yield Label("Phone")
                    yield Input(placeholder="+256 XXX XXX XXX", id="input-reg-phone")
                    yield Label("Address")
                    yield Input(placeholder="Plot 1, Kampala Road", id="input-reg-address")
                    with Container(id="div-reg-btns"):
                        yield Button("Register", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key != "enter":
            return
        if self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()
        elif self.focused == self.query_one("#input-reg-address"):
            self.handle_registration_submit()

    def action_back(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#btn-back")
    def handle_back(self) -> None:
        self.dismiss(False)

    def _set_busy(self, busy: bool) -> None:
        for btn in self.query(Button):
            btn.disabled = busy

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        email = self.query_one("#input-login-email", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value

        if not email or not pwd:
            self.notify("Email or password cannot be empty!", severity="error")
            return

        self._set_busy(True)
        try:
            user = await self.app.state.auth.login(email, pwd)
        except InvalidCredentials as e:
            self.notify(e.user_message, severity="error")
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")
            return
        except StorefrontError as e:
            self.notify(e.user_message, severity="error")
            return
        finally:
            self._set_busy(False)

        self.notify(f"Welcome back, {user.full_name}!")
        self.app.post_message(UserLoginMessage())
        self.dismiss(True)

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        name = self.query_one("#input-reg-name", Input).value.strip()
        email = self.query_one("#input-reg-email", Input).value.strip()
        pwd = self.query_one("#input-reg-pwd", Input).value
        phone = self.query_one("#input-reg-phone", Input).value
        address = self.query_one("#input-reg-address", Input).value

        if not name or not email or not pwd:
            self.notify("Name, email and password are required.", severity="error")
            return

        self._set_busy(True)
        try:
            user = await self.app.state.auth.register(
                email, pwd, name, phone=phone, address=address
            )
        except DuplicateEmail as e:
            self.notify(e.user_message, severity="error")
            self.query_one("#input-reg-email", Input).add_class("-invalid")
            return
        except StorefrontError as e:
            self.notify(e.user_message, severity="error")
            return
        finally:
            self._set_busy(False)

        self.notify(f"Registration successful. Welcome, {user.full_name}!")
        self.app.post_message(UserLoginMessage())
        self.dismiss(True)
