"""Extension interface, result wire format, process-backed extensions and the extension runner."""