"""
Precifix Server - CLI
Ferramenta de linha de comando para consultar clientes, orcamentos e agenda

Uso:
    python admin_cli.py login
    python admin_cli.py clients list [busca]
    python admin_cli.py quotes list [status]
    python admin_cli.py agenda [AAAA-MM-DD]
    python admin_cli.py balance
"""
import sys
import httpx
from pathlib import Path

BASE_URL = "http://localhost:8080"
TOKEN_FILE = Path(".precifix_token")


def save_token(token: str):
    TOKEN_FILE.write_text(token)


def load_token() -> str:
    if TOKEN_FILE.exists():
        return TOKEN_FILE.read_text().strip()
    return None


def get_headers():
    token = load_token()
    if not token:
        print("Erro: Faça login primeiro com 'python admin_cli.py login'")
        sys.exit(1)
    return {"Authorization": f"Bearer {token}"}


def format_brl(value) -> str:
    text = f"{value or 0:,.2f}"
    return "R$ " + text.replace(",", "X").replace(".", ",").replace("X", ".")


def cmd_login():
    """Login no sistema"""
    email = input("Email: ").strip()
    password = input("Senha: ").strip()

    try:
        response = httpx.post(
            f"{BASE_URL}/api/auth/login",
            json={"email": email, "password": password}
        )
        if response.status_code == 200:
            data = response.json()
            save_token(data["access_token"])
            print(f"\n✓ Login bem sucedido!")
            print(f"  Usuário: {data['user']['email']}")
            if data['user'].get('company_name'):
                print(f"  Empresa: {data['user']['company_name']}")
        else:
            print(f"✗ Erro: {response.json().get('detail', 'Falha no login')}")
    except httpx.HTTPError as e:
        print(f"✗ Erro de conexão: {e}")


def cmd_clients_list(search: str = None):
    """Lista clientes"""
    params = {"search": search} if search else {}
    try:
        response = httpx.get(f"{BASE_URL}/api/clients", params=params, headers=get_headers())
        if response.status_code == 200:
            clients = response.json()
            print(f"\n{'='*80}")
            print(f"{'Nome':<30} | {'Telefone':<16} | {'Cidade':<20} | {'Veículos':<8}")
            print(f"{'='*80}")
            for c in clients:
                print(
                    f"{c['name'][:30]:<30} | {(c.get('phone') or '-')[:16]:<16} | "
                    f"{(c.get('city') or '-')[:20]:<20} | {len(c.get('vehicles') or []):<8}"
                )
            print(f"\nTotal: {len(clients)} clientes")
        else:
            print(f"✗ Erro: {response.text}")
    except httpx.HTTPError as e:
        print(f"✗ Erro: {e}")


def cmd_quotes_list(status: str = None):
    """Lista orcamentos"""
    params = {"status": status} if status else {}
    try:
        response = httpx.get(f"{BASE_URL}/api/quotes", params=params, headers=get_headers())
        if response.status_code == 200:
            quotes = response.json()
            print(f"\n{'='*90}")
            print(f"{'Data':<10} | {'Cliente':<25} | {'Veículo':<20} | {'Status':<12} | {'Total':>12}")
            print(f"{'='*90}")
            for q in quotes:
                print(
                    f"{(q.get('quote_date') or '-'):<10} | {q['client_name'][:25]:<25} | "
                    f"{(q.get('vehicle') or '-')[:20]:<20} | {q['status']:<12} | {format_brl(q['total_price']):>12}"
                )
            print(f"\nTotal: {len(quotes)} orçamentos")
        else:
            print(f"✗ Erro: {response.json().get('detail', response.text)}")
    except httpx.HTTPError as e:
        print(f"✗ Erro: {e}")


def cmd_agenda(day: str = None):
    """Mostra a agenda do dia"""
    params = {"date": day} if day else {}
    try:
        response = httpx.get(f"{BASE_URL}/api/quotes/agenda", params=params, headers=get_headers())
        if response.status_code == 200:
            agenda = response.json()
            summary = agenda['summary']
            print(f"\n{'='*60}")
            print(f"  AGENDA DE {agenda['date']}")
            print(f"{'='*60}")
            for q in agenda['quotes']:
                services = ", ".join(s.get('name', '') for s in q.get('services_summary') or [])
                print(f"  {q.get('service_time') or '--:--'}  {q['client_name'][:25]:<25} {services[:25]}")
            print(f"{'='*60}")
            print(f"  Serviços: {summary['count']} (pendentes: {summary['pending']}, "
                  f"aceitos: {summary['accepted']}, fechados: {summary['closed']})")
            print(f"  Valor total: {format_brl(summary['total_value'])}")
        else:
            print(f"✗ Erro: {response.json().get('detail', response.text)}")
    except httpx.HTTPError as e:
        print(f"✗ Erro: {e}")


def cmd_balance():
    """Mostra saldo consolidado"""
    try:
        response = httpx.get(f"{BASE_URL}/api/financial/balance", headers=get_headers())
        if response.status_code == 200:
            balance = response.json()
            print(f"\n{'='*40}")
            print(f"  SALDO")
            print(f"{'='*40}")
            print(f"  Contas: {balance['accounts']}")
            print(f"  Saldo total: {format_brl(balance['total_balance'])}")
            print(f"  A pagar: {format_brl(balance['pending_payables'])}")
            print(f"  A receber: {format_brl(balance['pending_receivables'])}")
            print(f"{'='*40}")
        else:
            print(f"✗ Erro: {response.text}")
    except httpx.HTTPError as e:
        print(f"✗ Erro: {e}")


def print_help():
    print("""
Precifix Server - CLI
=====================

Comandos disponíveis:

  python admin_cli.py login                     - Fazer login
  python admin_cli.py clients list [busca]      - Listar clientes
  python admin_cli.py quotes list [status]      - Listar orçamentos
                                                  Status: pending, accepted, rejected, closed
  python admin_cli.py agenda [AAAA-MM-DD]       - Agenda do dia (padrão: hoje)
  python admin_cli.py balance                   - Saldo e contas pendentes

Exemplos:
  python admin_cli.py clients list "Silva"
  python admin_cli.py quotes list pending
  python admin_cli.py agenda 2026-03-02
""")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print_help()
        sys.exit(0)

    cmd = sys.argv[1].lower()
    arg = sys.argv[3] if len(sys.argv) > 3 else None

    if cmd == "login":
        cmd_login()
    elif cmd == "clients":
        if len(sys.argv) >= 3 and sys.argv[2] == "list":
            cmd_clients_list(arg)
        else:
            print("Uso: clients list [busca]")
    elif cmd == "quotes":
        if len(sys.argv) >= 3 and sys.argv[2] == "list":
            cmd_quotes_list(arg)
        else:
            print("Uso: quotes list [status]")
    elif cmd == "agenda":
        cmd_agenda(sys.argv[2] if len(sys.argv) > 2 else None)
    elif cmd == "balance":
        cmd_balance()
    elif cmd == "help":
        print_help()
    else:
        print(f"Comando desconhecido: {cmd}")
        print_help()
