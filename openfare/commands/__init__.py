"""Extension, payee and payment-method management with argparse subcommand helpers."""